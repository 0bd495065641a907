# GOGLOBAL - Market Expansion Analysis Service
# ============================================
# Collects product data, analyzes every target market and returns a
# market-entry feasibility report. Layered Architecture:
#
# ARCHITECTURE LAYERS:
# - Presentation:   FastAPI JSON API (web/) and the CLI runner
# - Application:    Validation and multi-market orchestration (no business rules)
# - Domain:         Result models, heuristic scorer, report summary
# - Infrastructure: Completion API relay, rate limiting, configuration
#
# This design allows easy replacement of infrastructure components
# (e.g., swap the in-memory rate-limit store for Redis, or DeepSeek for Gemini).
