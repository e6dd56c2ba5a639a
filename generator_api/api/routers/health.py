from fastapi import APIRouter, Request

router = APIRouter(tags=["meta"])

# public: skipped by the api key gate
@router.get("/health")
def health(request: Request):
    return {"status": "ok", "version": request.app.version}
