"""Entry point: ``uvicorn main:app``."""

import os

import uvicorn

from dish_analyzer.main import app

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
