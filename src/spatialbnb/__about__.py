__all__ = ('__title__',
           '__summary__',
           '__version__',
           '__author__',
           '__email__',
           '__license__',
           '__copyright__')

__title__: str = 'spatialbnb'
__summary__: str = 'A spatial branch-and-bound engine for box-constrained global optimization'
__version__: str = '0.1.0'
__author__: str = 'Gabriel A. Hackebeil'
__email__: str = 'gabe.hackebeil@gmail.com'
__license__: str = 'MIT'
__copyright__: str = 'Copyright {0}'.format(__author__)
