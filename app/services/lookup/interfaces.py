"""
Interfaces pour la résolution code-barres -> produit.
Définit le format canonique des produits et les contrats des sources.

Architecture Pattern : Interface Segregation Principle (ISP)
Inspiration : Repository Pattern, Strategy Pattern
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from .origin import mentions_canada


class SourceTag(str, Enum):
    """Sources consultées par la cascade, dans l'ordre de priorité."""
    CACHE = "cache"
    PRIMARY_CATALOG = "primary_catalog"
    SECONDARY_A = "secondary_a"
    SECONDARY_B = "secondary_b"
    WEB_SEARCH = "web_search"


@dataclass(frozen=True)
class CountryFields:
    """Signaux d'origine bruts, en texte libre."""
    countries: str = ""
    manufacturing_places: str = ""
    origins: str = ""


@dataclass(frozen=True)
class Citation:
    """Résultat de recherche web (titre, lien, extrait)."""
    title: str = ""
    link: str = ""
    snippet: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "link": self.link, "snippet": self.snippet}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Citation":
        return cls(
            title=data.get("title") or "",
            link=data.get("link") or "",
            snippet=data.get("snippet") or "",
        )


@dataclass(frozen=True)
class Provenance:
    """Métadonnées d'origine d'un enregistrement produit."""
    source: SourceTag
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    confidence: Optional[float] = None
    citations: Optional[List[Citation]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source.value,
            "fetched_at": self.fetched_at.isoformat(),
            "confidence": self.confidence,
            "citations": [c.to_dict() for c in self.citations] if self.citations is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Provenance":
        fetched_at = data.get("fetched_at")
        if isinstance(fetched_at, str):
            fetched_at = datetime.fromisoformat(fetched_at)
        citations = data.get("citations")
        return cls(
            source=SourceTag(data["source"]),
            fetched_at=fetched_at or datetime.now(timezone.utc),
            confidence=data.get("confidence"),
            citations=[Citation.from_dict(c) for c in citations] if citations is not None else None,
        )


@dataclass(frozen=True)
class ProductRecord:
    """
    Enregistrement produit canonique, identique quelle que soit la source.

    Tous les champs texte valent "" quand la source ne les fournit pas.
    `is_canadian` est toujours recalculé à partir des champs pays
    (OU le signal de confiance de la recherche web), jamais stocké.
    """
    barcode: str
    provenance: Provenance
    name: str = ""
    brand: str = ""
    image_url: str = ""
    category: str = ""
    description: str = ""
    ingredients: str = ""
    country_fields: CountryFields = field(default_factory=CountryFields)
    web_origin_signal: bool = False

    def __post_init__(self):
        if not self.barcode:
            raise ValueError("ProductRecord requires a barcode")

    @property
    def source(self) -> SourceTag:
        return self.provenance.source

    @property
    def is_canadian(self) -> bool:
        return mentions_canada(self.country_fields) or self.web_origin_signal

    def canadian_factors(self) -> Dict[str, bool]:
        """Détail par champ du signal d'origine."""
        fields = self.country_fields
        return {
            "countries": "canada" in fields.countries.lower(),
            "manufacturing": "canada" in fields.manufacturing_places.lower(),
            "origins": "canada" in fields.origins.lower(),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "barcode": self.barcode,
            "name": self.name,
            "brand": self.brand,
            "image_url": self.image_url,
            "category": self.category,
            "description": self.description,
            "ingredients": self.ingredients,
            "countries": self.country_fields.countries,
            "manufacturing_places": self.country_fields.manufacturing_places,
            "origins": self.country_fields.origins,
            "is_canadian": self.is_canadian,
            "web_origin_signal": self.web_origin_signal,
            "canadian_factors": self.canadian_factors(),
            "provenance": self.provenance.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductRecord":
        return cls(
            barcode=data["barcode"],
            provenance=Provenance.from_dict(data["provenance"]),
            name=data.get("name") or "",
            brand=data.get("brand") or "",
            image_url=data.get("image_url") or "",
            category=data.get("category") or "",
            description=data.get("description") or "",
            ingredients=data.get("ingredients") or "",
            country_fields=CountryFields(
                countries=data.get("countries") or "",
                manufacturing_places=data.get("manufacturing_places") or "",
                origins=data.get("origins") or "",
            ),
            web_origin_signal=bool(data.get("web_origin_signal", False)),
        )


@dataclass(frozen=True)
class LookupResult:
    """Enveloppe retournée à l'appelant : trouvé + enregistrement, ou raison."""
    found: bool
    record: Optional[ProductRecord] = None
    source: Optional[SourceTag] = None
    reason: str = ""

    @classmethod
    def hit(cls, record: ProductRecord, source: Optional[SourceTag] = None) -> "LookupResult":
        return cls(found=True, record=record, source=source or record.source)

    @classmethod
    def not_found(cls, reason: str) -> "LookupResult":
        return cls(found=False, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        if self.found:
            return {
                "found": True,
                "source": self.source.value,
                "is_canadian": self.record.is_canadian,
                "product": self.record.to_dict(),
            }
        return {"found": False, "reason": self.reason}


@dataclass(frozen=True)
class FetchResult:
    """
    Résultat d'un appel à une source.

    Trois cas : succès (record), absence (ni record ni erreur),
    échec (error). L'orchestrateur traite absence et échec de la même façon.
    """
    record: Optional[ProductRecord] = None
    error: Optional["ProviderError"] = None

    @classmethod
    def hit(cls, record: ProductRecord) -> "FetchResult":
        return cls(record=record)

    @classmethod
    def miss(cls) -> "FetchResult":
        return cls()

    @classmethod
    def failed(cls, error: "ProviderError") -> "FetchResult":
        return cls(error=error)

    @property
    def is_hit(self) -> bool:
        return self.record is not None


class ISourceProvider(ABC):
    """
    Contrat uniforme d'une source de la cascade.

    Responsabilités :
    - Recherche d'un produit par code-barres
    - Normalisation vers ProductRecord avant de retourner
    - Conversion de toute erreur transport/parsing en FetchResult.failed
    """

    @abstractmethod
    async def fetch(self, barcode: str) -> FetchResult:
        """
        Recherche un produit par son code-barres.

        Args:
            barcode: Code-barres, transmis tel quel

        Returns:
            FetchResult (hit, miss ou failed), ne lève jamais d'erreur de source
        """
        pass

    @property
    @abstractmethod
    def source(self) -> SourceTag:
        """Tag de la source."""
        pass

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Indique si les identifiants nécessaires sont présents."""
        pass

    @property
    @abstractmethod
    def timeout(self) -> float:
        """Délai maximal d'un appel, en secondes."""
        pass

    async def close(self):
        """Libère les ressources réseau de la source."""
        return None


class IPersistenceGateway(ABC):
    """Stockage clé-valeur des produits, indexé par code-barres."""

    @abstractmethod
    async def get_by_barcode(self, barcode: str) -> Optional[ProductRecord]:
        pass

    @abstractmethod
    async def upsert(self, record: ProductRecord) -> ProductRecord:
        """
        Insère ou remplace l'enregistrement (dernier écrit gagnant).

        Raises:
            PersistenceError: En cas d'échec d'écriture
        """
        pass


class IProductCatalog(IPersistenceGateway):
    """Stockage consultable : statistiques, recherche et alternatives canadiennes."""

    @abstractmethod
    async def count_products(self) -> int:
        pass

    @abstractmethod
    async def count_canadian_products(self) -> int:
        pass

    @abstractmethod
    async def search_products(self, query: str, canadian_only: bool = False) -> List[ProductRecord]:
        """Produits dont le nom, la marque ou la catégorie contient `query`."""
        pass

    @abstractmethod
    async def find_canadian_alternatives(self, barcode: str) -> Optional[List[ProductRecord]]:
        """
        Alternatives canadiennes d'un produit stocké.

        Returns:
            Liste (éventuellement vide), ou None si le produit n'est pas stocké
        """
        pass


class ProviderError(Exception):
    """Erreur transport ou parsing d'une source."""

    def __init__(self, message: str, source: str = "", barcode: str = "", original_error: Exception = None):
        super().__init__(message)
        self.source = source
        self.barcode = barcode
        self.original_error = original_error


class ProviderTimeoutError(ProviderError):
    """La source n'a pas répondu dans le délai imparti."""
    pass


class ProviderRateLimitError(ProviderError):
    """Quota de la source dépassé."""
    pass


class NormalizationError(ProviderError):
    """La réponse native ne peut pas être convertie en ProductRecord."""
    pass


class PersistenceError(Exception):
    """Échec de l'écriture après une résolution réussie."""

    def __init__(self, message: str, barcode: str = "", original_error: Exception = None):
        super().__init__(message)
        self.barcode = barcode
        self.original_error = original_error
