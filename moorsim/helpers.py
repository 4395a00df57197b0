
import os

import numpy as np
import yaml


# base class for moorsim exceptions
class Error(Exception):
    ''' Base class for moorsim exceptions'''
    pass

# Catenary error class
class CatenaryError(Error):
    '''Derived error class for catenary function errors. Contains an error message.'''
    def __init__(self, message):
        self.message = message
        super().__init__(message)

# Line Object error class
class LineError(Error):
    '''Derived error class for MooringLine object errors. Contains an error message and the line name.'''
    def __init__(self, num, message):
        self.line_num = num
        self.message = message
        super().__init__(f"Line {num}: {message}")

# Configuration error class
class ConfigError(Error):
    '''Derived error class for rejected simulation configurations. Contains an error message'''
    def __init__(self, message):
        self.message = str(message)
        super().__init__(self.message)

# Generic simulation error
class SimulationError(Error):
    '''Derived error class for the simulation loop. Contains an error message'''
    def __init__(self, message):
        self.message = str(message)
        super().__init__(self.message)


# gravitational acceleration [m/s^2]
G = 9.81


def getFromDict(dict, key, dtype=float, default=None):
    '''
    Function to streamline getting scalar values from a configuration dictionary, including error checking.

    Parameters
    ----------
    dict : dict
        the dictionary
    key : string
        the key in the dictionary
    dtype : type
        Must be a python type than can serve as a function to format the input value to the right type.
    default : number, optional
        The default value to fill in if the item isn't in the dictionary. Otherwise will raise error if the key doesn't exist.
    '''

    if key in dict:
        val = dict[key]
        if np.isscalar(val):
            return dtype(val)
        else:
            raise ValueError(f"Value for key '{key}' is expected to be a scalar but instead is: {val}")

    else:
        if default is None:
            raise ValueError(f"Key '{key}' not found in configuration...")
        else:
            return default


def loadYAML(source):
    '''Returns the dictionary held in a YAML file, or the dictionary itself if one is passed.'''

    if type(source) is dict:
        return source
    elif type(source) is str:
        with open(source) as file:
            return yaml.load(file, Loader=yaml.FullLoader)
    else:
        raise Exception("loadYAML supplied with invalid source")


def loadLineProps(source):
    '''Loads a set of mooring line property coefficients from a specified
    YAML file or passed dictionary. Any coefficients not included will take
    a default value of zero. It returns a dictionary containing the complete
    coefficient set for each provided material.

    Parameters
    ----------
    source : dict or filename
        YAML file name or dictionary containing line property coefficients

    Returns
    -------
    output : dictionary
        LineProps dictionary listing each supported material and
        subdictionaries of coefficients for each.
    '''

    if source is None or source=="default":
        msdir = os.path.dirname(os.path.realpath(__file__))
        source = os.path.join(msdir, "library", "lineProps_default.yaml")

    source = loadYAML(source)

    if 'lineProps' in source:
        lineProps = source['lineProps']
    else:
        raise Exception("YAML file or dictionary must have a 'lineProps' field containing the data")

    output = dict()

    for mat, props in lineProps.items():
        output[mat] = {}
        output[mat]['mass_0'   ] = getFromDict(props, 'mass_0'   , default=0.0)   # [kg/m]
        output[mat]['mass_d2'  ] = getFromDict(props, 'mass_d2'  , default=0.0)   # [kg/m/mm^2]
        output[mat]['T0'       ] = getFromDict(props, 'T0'       , default=0.0)   # taut base tension [N]
        output[mat]['k'        ] = getFromDict(props, 'k'        , default=0.0)   # taut stiffness [N/cm]
        output[mat]['stretch'  ] = getFromDict(props, 'stretch'  , default=1.0)   # max length ratio [-]

        if output[mat]['mass_0'] == 0.0 and output[mat]['mass_d2'] == 0.0:
            raise ValueError(f"Material '{mat}' needs a 'mass_0' or 'mass_d2' coefficient.")

    return output


def getLineProps(dnommm, material, lineProps=None, source=None, name="", g=G, **kwargs):
    '''Sets up a dictionary that represents a mooring line segment type
    based on the specified diameter and material type.

    Parameters
    ----------
    dnommm : float
        nominal diameter or chain link thickness [mm].
    material : string
        string identifier of the material type be used.
    lineProps : dictionary
        A lineProps dictionary data structure containing the property coefficients.
    source : dict or filename (optional)
        YAML file name or dictionary containing line property coefficients
    name : any dict index (optional)
        Identifier for the line type (otherwise will be generated automatically).
    g : float (optional)
        Gravitational constant used for computing weight [m/s^2].

    Returns
    -------
    lineType : dictionary
        A lineType dictionary with unit mass m [kg/m] and unit weight w [N/cm]
    '''

    if lineProps is None:
        lineProps = loadLineProps(source)

    if not material in lineProps:
        raise ValueError(f'Specified mooring line material, {material}, is not in the database.')

    mat = lineProps[material]
    mass = mat['mass_0'] + mat['mass_d2']*dnommm**2    # [kg/m]

    if name=="":
        typestring = f"{material}{dnommm:.0f}"
    else:
        typestring = name

    lineType = dict(name=typestring, material=material, d_nom=dnommm, m=mass,
                    w=mass*g/100.0, T0=mat['T0'], k=mat['k'], stretch=mat['stretch'])

    lineType.update(kwargs)   # custom overrides, e.g. T0 or k from the simulation configuration

    return lineType


def loadConfig(source):
    '''Reads a simulation configuration from a YAML file or dictionary.
    A top-level 'harbor' field is unwrapped if present.'''

    config = loadYAML(source)
    if config is None:
        return {}
    if 'harbor' in config:
        config = config['harbor']
    return dict(config)


def rotate2d(r, angle):
    '''Rotates a 2D vector counterclockwise by an angle [rad].'''
    c, s = np.cos(angle), np.sin(angle)
    return np.array([c*r[0] - s*r[1], s*r[0] + c*r[1]])
