# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App factory, lifespan, console entry point
# - config.py: Settings from defaults, YAML, .env and environment
# - middleware.py: Request ID, real IP, access log, recovery, timeout,
#   CORS and rate limiting
# - auth/: Login/registration routes and bearer-token dependencies
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
