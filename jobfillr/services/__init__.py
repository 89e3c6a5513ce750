from .autofill_service import AutofillService, get_autofill_service

__all__ = ["AutofillService", "get_autofill_service"]
