from sim6502.errors import Sim6502ValueError


class Sim6502Base:
    """
    Base class for sim6502 components that accept keyword options

    Subclasses declare ``options_with_defaults`` before calling ``set_options()``; option
    names not in that table are rejected.
    """
    def __init__(self):
        self._options = {}
        if not hasattr(self, 'options_with_defaults'):
            self.options_with_defaults = {}

    def get_option(self, arg, default=None):
        """
        Get an option

        :param arg: option name
        :type arg: str
        :param default: default value
        :type default: type of option
        :return: value of option
        :rtype: option type
        """
        if arg in self._options:
            return self._options[arg]
        return default

    def get_options(self):
        """
        Get a dictionary of all current options

        :return: options
        :rtype: dict
        """
        return self._options

    def set_options(self, **kwargs):
        """
        Set options.  All option keywords are converted to lowercase.

        :param kwargs: options
        :type kwargs: keyword options
        :raises Sim6502ValueError: for an option name the component does not declare
        """
        for op, val in kwargs.items():
            op = op.lower()  # All option names must be lowercase
            if op not in self.options_with_defaults:
                raise Sim6502ValueError('Error: Unexpected option "%s"' % (op))
            self._options[op] = val
