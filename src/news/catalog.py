"""
Site catalog: country -> news sites.

The built-in catalog can be replaced with a JSON file of the form
{"Country": [{"name": "...", "url": "..."}, ...], ...}.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import structlog

from ..exceptions import SelectionError, ValidationError
from ..utils.url_utils import validate_url

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Site:
    name: str
    url: str
    country: str


@dataclass(frozen=True)
class Country:
    name: str
    sites: Tuple[Site, ...]


SiteCatalog = Mapping[str, Country]


DEFAULT_NEWS_SITES: Dict[str, List[Tuple[str, str]]] = {
    "South Korea": [
        ("Yonhap News", "https://www.yna.co.kr/"),
        ("Chosun Ilbo", "https://www.chosun.com/"),
        ("JoongAng Ilbo", "https://joongang.joins.com/"),
        ("KBS", "https://news.kbs.co.kr/"),
        ("MBC", "https://imnews.imbc.com/"),
    ],
    "Japan": [
        ("Asahi Shimbun", "https://www.asahi.com/"),
        ("Yomiuri Shimbun", "https://www.yomiuri.co.jp/"),
        ("NHK", "https://www3.nhk.or.jp/news/"),
        ("Mainichi Shimbun", "https://mainichi.jp/"),
    ],
    "China": [
        ("Xinhua", "http://www.xinhuanet.com/"),
        ("Global Times", "https://www.globaltimes.cn/"),
        ("CGTN", "https://www.cgtn.com/"),
    ],
    "United States": [
        ("CNN", "https://www.cnn.com/"),
        ("New York Times", "https://www.nytimes.com/"),
        ("Washington Post", "https://www.washingtonpost.com/"),
        ("Fox News", "https://www.foxnews.com/"),
        ("CNBC", "https://www.cnbc.com/"),
    ],
    "United Kingdom": [
        ("BBC", "https://www.bbc.com/news"),
        ("The Guardian", "https://www.theguardian.com/"),
        ("The Times", "https://www.thetimes.co.uk/"),
        ("Financial Times", "https://www.ft.com/"),
    ],
    "France": [
        ("Le Monde", "https://www.lemonde.fr/"),
        ("Le Figaro", "https://www.lefigaro.fr/"),
        ("France 24", "https://www.france24.com/"),
    ],
    "Germany": [
        ("Der Spiegel", "https://www.spiegel.de/"),
        ("Die Welt", "https://www.welt.de/"),
        ("Deutsche Welle", "https://www.dw.com/"),
    ],
    "Russia": [
        ("Russia Today", "https://www.rt.com/"),
        ("TASS", "https://tass.com/"),
        ("Pravda", "https://www.pravda.ru/"),
    ],
    "India": [
        ("The Times of India", "https://timesofindia.indiatimes.com/"),
        ("Hindustan Times", "https://www.hindustantimes.com/"),
        ("The Hindu", "https://www.thehindu.com/"),
    ],
    "Brazil": [
        ("O Globo", "https://oglobo.globo.com/"),
        ("Folha de S.Paulo", "https://www.folha.uol.com.br/"),
    ],
    "Australia": [
        ("The Sydney Morning Herald", "https://www.smh.com.au/"),
        ("The Australian", "https://www.theaustralian.com.au/"),
        ("ABC News", "https://www.abc.net.au/news/"),
    ],
    "Canada": [
        ("CBC", "https://www.cbc.ca/news"),
        ("The Globe and Mail", "https://www.theglobeandmail.com/"),
    ],
    "South Africa": [
        ("News24", "https://www.news24.com/"),
        ("Mail & Guardian", "https://mg.co.za/"),
    ],
    "Egypt": [
        ("Al-Ahram", "http://english.ahram.org.eg/"),
        ("Egypt Independent", "https://egyptindependent.com/"),
    ],
    "Mexico": [
        ("El Universal", "https://www.eluniversal.com.mx/"),
        ("Reforma", "https://www.reforma.com/"),
    ],
}


def build_catalog(raw: Mapping[str, Iterable]) -> Dict[str, Country]:
    """
    Build an immutable catalog from a country -> sites mapping.

    Sites may be (name, url) pairs or {"name": ..., "url": ...} dicts.

    Raises:
        ValidationError: when a site entry is malformed or its URL is invalid
    """
    catalog: Dict[str, Country] = {}

    for country_name, entries in raw.items():
        if not isinstance(country_name, str) or not country_name.strip():
            raise ValidationError(f"Invalid country name: {country_name!r}")

        if isinstance(entries, (str, bytes, Mapping)) or not isinstance(entries, Iterable):
            raise ValidationError(f"Sites of {country_name} must be a list, got {type(entries).__name__}")

        sites = []
        for entry in entries:
            if isinstance(entry, Mapping):
                name, url = entry.get("name"), entry.get("url")
            elif isinstance(entry, (list, tuple)) and len(entry) == 2:
                name, url = entry
            else:
                raise ValidationError(f"Malformed site entry in {country_name}: {entry!r}")

            if not name:
                raise ValidationError(f"Site without a name in {country_name}")
            validate_url(url)
            sites.append(Site(name=name, url=url, country=country_name))

        catalog[country_name] = Country(name=country_name, sites=tuple(sites))

    return catalog


def load_catalog(path: Optional[str] = None) -> Dict[str, Country]:
    """Load the catalog from a JSON file, or the built-in one when no path is given"""
    if not path:
        return build_catalog(DEFAULT_NEWS_SITES)

    catalog_path = Path(path)
    try:
        raw = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"Could not read site catalog {catalog_path}: {e}")

    if not isinstance(raw, dict):
        raise ValidationError(f"Site catalog {catalog_path} must be a JSON object")

    catalog = build_catalog(raw)
    logger.info("site_catalog_loaded", path=str(catalog_path), countries=len(catalog))
    return catalog


def sites_for_countries(catalog: SiteCatalog, countries: Iterable[str]) -> List[Site]:
    """Expand selected countries into a flat list of sites, in country order"""
    sites: List[Site] = []

    for country_name in countries:
        country = catalog.get(country_name)
        if country is None:
            raise SelectionError(
                "Selected country is not in the site catalog",
                cause=f"Unknown country: {country_name}",
            )
        sites.extend(country.sites)

    return sites
