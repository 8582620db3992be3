import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

load_dotenv()

from app.config import settings

# Import routers
from app.routers import ocr, history, resume, export

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="PDF2MD API",
    description="FastAPI backend to OCR PDFs into markdown and transcribe Japanese resumes.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ocr.router, prefix="/api/v1", tags=["OCR"])
app.include_router(history.router, prefix="/api/v1", tags=["OCR History"])
app.include_router(resume.router, prefix="/api/v1", tags=["Resume Extraction"])
app.include_router(export.router, prefix="/api/v1", tags=["Export"])


@app.get("/")
async def root():
    return {"message": "PDF2MD API is running. Use endpoints under /api/v1/"}


# Local development runner
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="127.0.0.1", port=8000, reload=True)
