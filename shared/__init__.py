"""
Shared Kernel

Cross-app building blocks: the error taxonomy every API failure maps to
(``shared.domain.exceptions``), the DRF exception handler that renders it and
the page/limit paginator (``shared.infrastructure``).
"""
