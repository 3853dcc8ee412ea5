"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import api_key_protection
from src.api.endpoints.freight import freight_api, legacy_api

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="SSW Freight Bridge API",
    description="Normalizes freight quotation and collection requests for the SSW SOAP service",
    version="1.0.0",
    dependencies=[Depends(api_key_protection)],  # protect everything by default
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(freight_api, prefix="/api/v1/freight")
app.include_router(legacy_api, prefix="/api")


@app.get("/health")
async def health():
    return {"status": "ok"}
