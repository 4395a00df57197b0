
# import moorsim modules

# make the classes and functions accessible directly from moorsim
from moorsim.helpers import *
from moorsim.catenary import catenary, seabedCatenary, getArcLength, getMaxSag
from moorsim.line import MooringLine
from moorsim.point import Anchor, Dock
from moorsim.boat import Boat
from moorsim.environment import Environment
from moorsim.constraints import clampPosition, solveAttitude, classifyStatus, getAllowedOffset
from moorsim.system import System, tick, DEFAULT_CONFIG, MOORING_KEYS, WEATHER_MODES, validateConfig

# set up a module-level logger with no output unless the host configures logging
import logging
logging.getLogger(__name__).addHandler(logging.NullHandler())
