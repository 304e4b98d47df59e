# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Showroom Admin API:
# - test_media.py: Media Reference Codec (shapes, round trip, cleanup paths)
# - test_editors.py: Record editor scenarios against in-memory fakes
# - test_storage.py, test_record_store.py: Supabase wrappers with mocks
# - test_listing.py, test_customers.py, test_admins.py: list screens and roster
# - test_auth.py, test_routes.py: API endpoints through TestClient
#
# Run tests with: pytest
# =============================================================================
