"""Service layer — every operation returns a ServiceResult."""
