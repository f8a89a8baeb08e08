from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from engine.in_memory import get_index
from engine.types import ClusterNotFoundError
from geo.aoi import BBox
from layers.types import feature_collection
from scenarios.registry import ScenarioNotFoundError, list_scenarios
from telemetry.singleton import get_store

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ClusterNotFoundError)
@app.exception_handler(ScenarioNotFoundError)
async def not_found_handler(request: Request, exc: LookupError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.get("/scenarios")
def get_scenarios():
    return [cfg.model_dump() for cfg in list_scenarios()]


@app.get("/scenarios/{scenario_id}/clusters")
def get_clusters(
    scenario_id: str,
    zoom: float = Query(ge=0.0),
    bbox: str = Query(default="-180,-90,180,90", description="west,south,east,north"),
):
    try:
        box = BBox.parse(bbox)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    index = get_index(scenario_id)
    return feature_collection(index.get_clusters(zoom, box))


@app.get("/scenarios/{scenario_id}/clusters/{cluster_id}/children")
def get_children(scenario_id: str, cluster_id: int):
    return feature_collection(get_index(scenario_id).get_children(cluster_id))


@app.get("/scenarios/{scenario_id}/clusters/{cluster_id}/leaves")
def get_leaves(
    scenario_id: str,
    cluster_id: int,
    limit: int = Query(default=10, ge=1),
    offset: int = Query(default=0, ge=0),
):
    leaves = get_index(scenario_id).get_leaves(cluster_id, limit=limit, offset=offset)
    return feature_collection(leaves)


@app.get("/scenarios/{scenario_id}/clusters/{cluster_id}/expansion-zoom")
def get_expansion_zoom(scenario_id: str, cluster_id: int):
    zoom = get_index(scenario_id).get_cluster_expansion_zoom(cluster_id)
    return {"clusterId": cluster_id, "zoom": zoom}


@app.get("/scenarios/{scenario_id}/tiles/{z}/{x}/{y}")
def get_tile(scenario_id: str, z: int, x: int, y: int):
    if z < 0 or not (0 <= x < 2**z and 0 <= y < 2**z):
        raise HTTPException(status_code=422, detail=f"Invalid tile {z}/{x}/{y}")
    tile = get_index(scenario_id).get_tile(z, x, y)
    if tile is None:
        return Response(status_code=204)
    return tile.to_dict()


@app.get("/telemetry/phases")
def get_phase_summary(scenario: str | None = None):
    store = get_store()
    if store is None:
        return []
    store.flush()
    return store.summary(scenario=scenario)
