from fastapi import Request, status
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.operator_metadata import (
    OperatorMetadata,
    OperatorMetadataError,
    from_headers,
    from_operator_metadata,
)
from src.domain.viewer import AnonymousViewer, Viewer

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


async def get_operator(request: Request) -> OperatorMetadata:
    """
    Dependency to read the operator metadata header, failing closed.

    The header is set by OperatorMetadataMiddleware from the bearer token, or
    forwarded by a trusted upstream service.

    Raises:
        ClientError: 401 if the header is missing, malformed or undecodable
    """
    try:
        return from_headers(request.headers)
    except OperatorMetadataError as e:
        raise ClientError(e.error, status_code=status.HTTP_401_UNAUTHORIZED)


async def get_viewer(request: Request) -> Viewer:
    """Viewer for the request; anonymous when there is no usable metadata"""
    operator = from_operator_metadata(request.headers)
    if operator is None:
        return AnonymousViewer()
    return operator.to_viewer()
