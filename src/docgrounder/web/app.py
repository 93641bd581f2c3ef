"""FastAPI application exposing grounding-context retrieval."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from docgrounder import __version__
from docgrounder.config import AppConfig
from docgrounder.index.indexer import KnowledgeBase
from docgrounder.index.search import format_context

LOGGER = logging.getLogger(__name__)

MAX_TOP_N = 20


class RetrievePayload(BaseModel):
    query: str
    top_n: int | None = None


class ResultItem(BaseModel):
    index: int
    file_name: str
    score: float
    content: str


class RetrieveResponse(BaseModel):
    context: str
    found: bool
    results: List[ResultItem]


def _knowledge_base(request: Request) -> KnowledgeBase:
    return request.app.state.knowledge_base


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the API around one :class:`KnowledgeBase`, loaded on startup."""
    knowledge_base = KnowledgeBase(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        await knowledge_base.aload()
        yield

    app = FastAPI(title="DocGrounder", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.knowledge_base = knowledge_base

    @app.post("/retrieve")
    async def retrieve(payload: RetrievePayload, request: Request) -> RetrieveResponse:
        query = payload.query.strip()
        if not query:
            raise HTTPException(status_code=400, detail="Empty query")

        knowledge_base = _knowledge_base(request)
        top_n = payload.top_n if payload.top_n is not None else knowledge_base.config.top_n
        top_n = max(1, min(top_n, MAX_TOP_N))

        results = knowledge_base.search(query, top_n=top_n)
        context = format_context(results)
        return RetrieveResponse(
            context=context,
            found=bool(results),
            results=[
                ResultItem(
                    index=result.index,
                    file_name=result.file_name,
                    score=result.score,
                    content=result.content,
                )
                for result in results
            ],
        )

    @app.post("/reload")
    async def reload(request: Request) -> dict[str, Any]:
        knowledge_base = _knowledge_base(request)
        try:
            stats = await knowledge_base.areload()
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.exception("Reload failed: %s", exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return {
            "status": "ok",
            "stats": {
                "documents": stats.documents,
                "terms": stats.terms,
                "background": stats.background,
                "elapsed": stats.elapsed,
            },
        }

    @app.get("/documents")
    async def list_documents(request: Request) -> dict[str, Any]:
        """List the documents in the live index, in index order."""
        snapshot = _knowledge_base(request).snapshot
        documents = [
            {
                "index": position,
                "file_name": document.file_name,
                "last_modified": document.last_modified.isoformat(),
                "size": len(document.content),
            }
            for position, document in enumerate(snapshot.documents)
        ]
        return {"documents": documents, "stats": {"document_count": len(documents), "term_count": snapshot.stats.terms}}

    return app
