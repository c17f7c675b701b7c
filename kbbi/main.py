from fastapi import FastAPI

# Routers
from kbbi.api.routers.entries import router as entries_router


app = FastAPI(title="KBBI Entry Service", version="0.1")

# Register routers (paths preserved as defined in each module)
app.include_router(entries_router)
