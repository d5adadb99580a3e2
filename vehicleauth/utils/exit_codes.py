"""Centralized exit codes for the vehicleauth CLI."""


class ExitCodes:
    """Standard exit codes for vehicleauth CLI commands."""

    SUCCESS = 0

    ENTITY_ERRORS = 1
    VERIFICATION_FAILED = 2

    CONNECTION_FAILED = 3
    CATALOG_DEFECT = 4

    TIMEOUT = 5

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - schema applied without entity errors",
            cls.ENTITY_ERRORS: "One or more entities could not be created",
            cls.VERIFICATION_FAILED: "Live schema does not match the catalog",
            cls.CONNECTION_FAILED: "Database could not be opened or is locked",
            cls.CATALOG_DEFECT: "Catalog is malformed or has a foreign-key cycle",
            cls.TIMEOUT: "Schema command exceeded its timeout and was terminated",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")

