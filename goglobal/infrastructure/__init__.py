# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - llm/:       prompt templates and the completion API relay
# - ratelimit/: per-client request limiting
# - config/:    environment and settings management
#
# This layer can be replaced entirely without affecting domain/application layers.
