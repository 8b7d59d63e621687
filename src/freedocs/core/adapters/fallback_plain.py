"""Lowest-confidence adapter that rebuilds the document from its text lines"""

from freedocs.core.adapters.shared import Adapter, text_fallback_structure


ADAPTER = Adapter(name='fallbackPlain', detect=lambda soup: 0, process=text_fallback_structure)
