from briefly.services.allocator import SequenceAllocator
from briefly.services.strategies import CodeStrategy, SequenceStrategy, RandomCodeStrategy
from briefly.services.shortener import ShortenerService
from briefly.services.factory import build_shortener_service


__all__ = [
    'SequenceAllocator',
    'CodeStrategy',
    'SequenceStrategy',
    'RandomCodeStrategy',
    'ShortenerService',
    'build_shortener_service',
]
