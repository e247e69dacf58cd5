# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

VERSION = (0, 1, 0)

__version__ = ".".join(map(str, VERSION))
