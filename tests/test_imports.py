"""Test that public API is importable from package root."""


def test_main_imports():
    from docservice import (
        DocumentService,
        Datastore,
        Params,
        Page,
        ServiceOptions,
        StoreConfig,
        PaginateConfig,
        JsonSchemaValidator,
        InProcessEventBus,
        NotFound,
        ValidationError,
        create_service,
    )
    from restapp import create_app, AppConfig

    # Just verify they're importable
    assert DocumentService is not None
    assert Datastore is not None
    assert create_app is not None
    assert callable(create_service)
