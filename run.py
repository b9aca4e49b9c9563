#!/usr/bin/env python3
"""Development server with an example todos service."""

from pathlib import Path

import uvicorn

from docservice import Datastore, DocumentService, ServiceOptions, StoreConfig
from restapp import AppConfig, create_app
from restapp.logging_config import setup_logging

if __name__ == "__main__":
    app_config = AppConfig(debug=True)
    setup_logging(app_config.log_level, app_config.log_file)

    todos = DocumentService(
        ServiceOptions(
            model=Datastore("todos", StoreConfig(path=Path("db-data"))),
            path="todos",
        )
    )
    app = create_app({"todos": todos}, app_config)

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=3030,
        reload=False,
        log_level="info",
    )
