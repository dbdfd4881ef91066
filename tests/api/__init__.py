"""REST API tests run through ``ApiClient``."""
