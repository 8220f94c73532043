from fastapi import APIRouter, Depends
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from catalog_service.dependencies.depend import authentication_get_service_user

router = APIRouter(tags=["Metrics"], include_in_schema=False)


@router.get("/metrics", dependencies=[Depends(authentication_get_service_user)])
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
