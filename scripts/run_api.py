#!/usr/bin/env python3
"""
Entry point that starts the FastAPI server
"""
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=os.getenv("WIZARD_API_HOST", "0.0.0.0"),
        port=int(os.getenv("WIZARD_API_PORT", "8000")),
        reload=os.getenv("WIZARD_API_RELOAD", "") == "1",  # auto reload during development
    )
