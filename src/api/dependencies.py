from fastapi import Depends, HTTPException, Request

from ..config import Settings, get_settings
from ..news.catalog import SiteCatalog
from ..news.services.clients import ServiceClients
from ..news.services.crawl_pipeline import CrawlPipeline


def get_service_clients(request: Request) -> ServiceClients:
    clients = getattr(request.app.state, "clients", None)
    if clients is None:
        raise HTTPException(status_code=503, detail="Service clients are not initialized")
    return clients


def get_site_catalog(request: Request) -> SiteCatalog:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise HTTPException(status_code=503, detail="Site catalog is not loaded")
    return catalog


def get_crawl_pipeline(
    settings: Settings = Depends(get_settings),
    clients: ServiceClients = Depends(get_service_clients),
    catalog: SiteCatalog = Depends(get_site_catalog)
) -> CrawlPipeline:
    return CrawlPipeline.from_settings(settings, clients, catalog=catalog)
