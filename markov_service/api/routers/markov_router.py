import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from markov_service.config import settings
from markov_service.services.errors import ChainLoadError, InvalidChainName
from markov_service.services.markov import MarkovChain, NoSuchSeed, detokenize
from markov_service.services.registry import ChainRegistry, get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/markov", tags=["markov"])


class CorpusRequest(BaseModel):
    chain: str = Field(default_factory=lambda: settings.DEFAULT_CHAIN)
    corpus: list[str]
    lowercase: bool = False


class GenerateRequest(BaseModel):
    chain: str = Field(default_factory=lambda: settings.DEFAULT_CHAIN)
    seed: Optional[str] = None
    case_insensitive: bool = False
    max_tokens: Optional[int] = Field(default=None, ge=1)


class MergeRequest(BaseModel):
    chain: str = Field(default_factory=lambda: settings.DEFAULT_CHAIN)
    source: str
    subtract: bool = False


def _require_chain(registry: ChainRegistry, name: str) -> MarkovChain:
    chain = registry.get(name)
    if chain is None:
        raise HTTPException(status_code=404, detail=f"chain '{name}' not found, train first")
    return chain


def _autosave(registry: ChainRegistry, name: str):
    if settings.AUTOSAVE:
        registry.save(name)


@router.post("/train")
async def train(req: CorpusRequest, registry: ChainRegistry = Depends(get_registry)):
    if not req.corpus:
        raise HTTPException(status_code=400, detail="corpus is empty")
    try:
        with registry.lock(req.chain):
            chain = registry.get_or_create(req.chain)
            chain.train(req.corpus, lowercase=req.lowercase)
            _autosave(registry, req.chain)
    except InvalidChainName as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "data": {"chain": req.chain, "tokens": len(chain)}}


@router.post("/forget")
async def forget(req: CorpusRequest, registry: ChainRegistry = Depends(get_registry)):
    try:
        with registry.lock(req.chain):
            chain = _require_chain(registry, req.chain)
            chain.forget(req.corpus, lowercase=req.lowercase)
            _autosave(registry, req.chain)
    except InvalidChainName as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "data": {"chain": req.chain, "tokens": len(chain)}}


@router.post("/generate")
async def generate(req: GenerateRequest, registry: ChainRegistry = Depends(get_registry)):
    max_tokens = min(req.max_tokens or settings.MAX_GENERATE_TOKENS, settings.MAX_GENERATE_TOKENS)

    try:
        with registry.lock(req.chain):
            chain = _require_chain(registry, req.chain)
            if req.seed is None:
                tokens = chain.generate(max_tokens=max_tokens)
            else:
                if req.case_insensitive:
                    result = chain.generate_with_case_insensitive_seed(req.seed, max_tokens=max_tokens)
                else:
                    result = chain.generate_with_seed(req.seed, max_tokens=max_tokens)
                if isinstance(result, NoSuchSeed):
                    raise HTTPException(status_code=404, detail=f"seed '{req.seed}' not found")
                tokens = result.tokens
    except InvalidChainName as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"ok": True, "data": {"text": detokenize(tokens), "tokens": tokens}}


@router.post("/merge")
async def merge(req: MergeRequest, registry: ChainRegistry = Depends(get_registry)):
    try:
        with registry.lock_many(req.chain, req.source):
            source = _require_chain(registry, req.source)
            target = registry.get_or_create(req.chain)
            if req.subtract:
                target.remove_chain(source)
            else:
                target.add_chain(source)
            _autosave(registry, req.chain)
    except InvalidChainName as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "data": {"chain": req.chain, "tokens": len(target)}}


@router.get("/chains")
async def list_chains(registry: ChainRegistry = Depends(get_registry)):
    chains = {}
    for name in registry.names():
        chain = registry.get(name)
        if chain is not None:
            chains[name] = len(chain)
    return {"ok": True, "data": {"chains": chains}}


@router.get("/chains/{name}")
async def get_chain(name: str, registry: ChainRegistry = Depends(get_registry)):
    try:
        with registry.lock(name):
            table = _require_chain(registry, name).to_dict()
    except InvalidChainName as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "data": {"chain": name, "table": table}}


@router.delete("/chains/{name}")
async def delete_chain(name: str, registry: ChainRegistry = Depends(get_registry)):
    """Clear and drop a chain, removing its saved file as well."""
    try:
        with registry.lock(name):
            chain = registry.get(name)
            if chain is not None:
                chain.clear()
            removed = registry.drop(name, delete_file=True)
    except InvalidChainName as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not removed:
        raise HTTPException(status_code=404, detail=f"chain '{name}' not found")
    return {"ok": True, "data": {"chain": name}}


@router.post("/chains/{name}/save")
async def save_chain(name: str, registry: ChainRegistry = Depends(get_registry)):
    try:
        with registry.lock(name):
            _require_chain(registry, name)
            path = registry.save(name)
    except InvalidChainName as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OSError as e:
        logger.error(f"[Markov] Failed to save '{name}': {e}")
        raise HTTPException(status_code=500, detail=f"failed to save chain: {e}")
    return {"ok": True, "data": {"chain": name, "path": str(path)}}


@router.post("/chains/{name}/load")
async def load_chain(name: str, registry: ChainRegistry = Depends(get_registry)):
    try:
        path = registry.path_for(name)
        if not path.exists():
            raise HTTPException(status_code=404, detail=f"no saved chain '{name}'")
        with registry.lock(name):
            chain = registry.load(name)
    except InvalidChainName as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ChainLoadError as e:
        logger.error(f"[Markov] Failed to load '{name}': {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return {"ok": True, "data": {"chain": name, "tokens": len(chain)}}
