from .codegen import CodeGenerator, is_valid_code
from .link_manager import LinkManager, validate_code, validate_url
from .resolver import RedirectResolver, RedirectTarget

__all__ = [
    "CodeGenerator",
    "is_valid_code",
    "LinkManager",
    "validate_code",
    "validate_url",
    "RedirectResolver",
    "RedirectTarget",
]
