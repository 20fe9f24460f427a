from briefly.models.url_mapping_model import AllocationStrategy, ShortenResult, UrlMappingModel


__all__ = [
    'AllocationStrategy',
    'ShortenResult',
    'UrlMappingModel',
]
