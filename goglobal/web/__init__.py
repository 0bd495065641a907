# Presentation Layer
# ==================
# FastAPI application exposing the analysis API.
