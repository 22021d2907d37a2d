import pkgutil
from importlib import import_module

from fastapi import APIRouter

from book_catalog.api import http as http_endpoints
from book_catalog.logging import logger

# Endpoint modules already reported, so a rebuilt app does not log twice
_announced: set[str] = set()


def collect_subrouters() -> APIRouter:
    """
    Merge the ``router`` of every module in ``book_catalog.api.http``.

    Adding an endpoint module is enough to publish its routes; the
    application factory never lists them.
    """
    root = APIRouter()

    for module_info in pkgutil.iter_modules(http_endpoints.__path__):
        module = import_module(f"{http_endpoints.__name__}.{module_info.name}")
        root.include_router(module.router)

        if module_info.name not in _announced:
            logger.info(f"Registered {module_info.name} endpoints")
            _announced.add(module_info.name)

    return root
