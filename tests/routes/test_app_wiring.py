# -*- coding: utf-8 -*-
# backend/tests/routes/test_app_wiring.py
"""
Ensamblado de la aplicación: app.main importa sin errores y cada módulo
queda montado bajo /api con sus rutas raíz ("" del prefijo) incluidas.
"""

import importlib

from fastapi.routing import APIRoute


def _routes(app) -> set[tuple[str, str]]:
    pairs = set()
    for route in app.routes:
        if isinstance(route, APIRoute):
            for method in route.methods:
                pairs.add((method, route.path))
    return pairs


def test_main_module_imports_and_exposes_app():
    module = importlib.import_module("app.main")
    assert module.app.title


def test_module_routers_import_standalone():
    for name in (
        "app.modules.invoices.routes",
        "app.modules.ocr.routes",
        "app.modules.bulk_import.routes",
        "app.modules.lhdn.routes",
        "app.modules.businesses.routes",
    ):
        module = importlib.import_module(name)
        assert module.router.routes, name


def test_prefix_root_routes_are_mounted(app):
    routes = _routes(app)
    assert ("GET", "/api/invoices") in routes
    assert ("POST", "/api/invoices") in routes
    assert ("POST", "/api/uploads") in routes
    assert ("GET", "/api/bulk-imports") in routes


def test_every_domain_endpoint_is_mounted(app):
    routes = _routes(app)
    expected = {
        ("GET", "/api/invoices/{invoice_id}"),
        ("PATCH", "/api/invoices/{invoice_id}"),
        ("DELETE", "/api/invoices/{invoice_id}"),
        ("POST", "/api/invoices/{invoice_id}/finalize"),
        ("POST", "/api/uploads/confirm"),
        ("GET", "/api/uploads/documents/{document_id}"),
        ("POST", "/api/lhdn/invoices/{invoice_id}/submit"),
        ("POST", "/api/lhdn/invoices/{invoice_id}/poll"),
        ("POST", "/api/lhdn/invoices/{invoice_id}/cancel"),
        ("GET", "/api/lhdn/invoices/{invoice_id}/submissions"),
        ("POST", "/api/bulk-imports/sessions"),
        ("GET", "/api/bulk-imports/sessions/{session_id}"),
        ("POST", "/api/bulk-imports/sessions/{session_id}/submit-all"),
        ("POST", "/api/bulk-imports/csv"),
        ("GET", "/api/bulk-imports/{bulk_import_id}"),
        ("GET", "/api/businesses/me"),
        ("PUT", "/api/businesses/me/lhdn-credentials"),
    }
    assert expected <= routes


# Fin del archivo backend/tests/routes/test_app_wiring.py
