from briefly.dao.base.mapping_base_dao import MappingBaseDAO
from briefly.dao.base.sequence_base_dao import SequenceBaseDAO
from briefly.dao.base.resolution_cache_base_dao import ResolutionCacheBaseDAO


__all__ = [
    'MappingBaseDAO',
    'SequenceBaseDAO',
    'ResolutionCacheBaseDAO',
]
