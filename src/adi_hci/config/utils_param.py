"""Module for splitting and printing the parameters of the algorithms."""
from dataclasses import fields, is_dataclass


def separate_kwargs_dict(initial_kwargs: dict, parent_class: any):
    """
    Take a set of kwargs parameters and split them in two separate dicts.

    The condition for the separation is to extract the parameters of an object
    (example: RotationOptions) and leave the other parameters as another
    dictionnary. This is used in ``adi_hci.psfsub`` and ``adi_hci.greedy`` to
    allow both the rotation options and the options of the fit to be passed as
    one kwargs.

    Parameters
    ----------
    initial_kwargs: dict
        The complete set of kwargs to separate.
    parent_class: class
        The model containing the parameters to extract into the first
        dictionnary.

    Return
    ------
    class_params: dict
        Parameters for the parent class to initialize.
    more_params: dict
        Parameters left after extracting the class_params.
    """
    if is_dataclass(parent_class):
        names = {f.name for f in fields(parent_class)}
    else:
        names = set(vars(parent_class))

    class_params = {}
    more_params = {}
    for key, value in initial_kwargs.items():
        if key in names:
            class_params[key] = value
        else:
            more_params[key] = value

    return class_params, more_params


def print_algo_params(algo: any) -> None:
    """
    Print the configuration of an algorithm, one field per line.

    Parameters
    ----------
    algo : dataclass instance
        Algorithm whose fields are printed.
    """
    print("{} parameters:".format(type(algo).__name__))
    for f in fields(algo):
        value = getattr(algo, f.name)
        if isinstance(value, (list, tuple)) and value and is_dataclass(value[0]):
            value = [type(v).__name__ for v in value]
        elif is_dataclass(value):
            value = type(value).__name__
        print("    {}: {}".format(f.name, value))
