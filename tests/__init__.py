# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the marketplace API:
# - fakes.py: In-memory store, cache and embedding adapters
# - test_models.py / test_config.py / test_security.py: Unit tests
# - test_*_service.py: Service behaviour over the in-memory adapters
# - test_*_client.py / test_embeddings.py: Adapter error translation
# - test_middleware.py / test_api.py: HTTP tests through the full app
#
# Run tests with: pytest
# =============================================================================
