"""
    Finds a receiver on the local network when no address is given.

    Receivers announce an AirPlay (raop) service over mDNS, named after the model,
    e.g. "0005CD221B08@DENON-AVR-1912". Discovery browses for that service and returns
    the host name of the first one whose name matches the filter.

    Two strategies share the same contract, discover() -> hostname:
    ZeroconfDiscovery browses in-process using the zeroconf library, AvahiBrowseDiscovery
    runs the avahi-browse tool.
"""
import logging
import subprocess
import sys
from queue import Empty, Queue

from zeroconf import ServiceBrowser, Zeroconf

from denoncontrol.config.config import configure_module
from denoncontrol.errors import ReceiverNotFoundError

logger = logging.getLogger(__name__)

service_type = 'raop'
name_filter = 'DENON'
# seconds to browse before giving up
browse_timeout = 5.0
avahi_browse = '/usr/bin/avahi-browse'

configure_module(sys.modules[__name__])


class ReceiverDiscovery:
    """ Locates a receiver. """

    def discover(self) -> str:
        """
        :return: the host name of a receiver.
        :raises ReceiverNotFoundError: if no receiver is found.
        """
        raise NotImplementedError

    def __call__(self):
        return self.discover()

    @staticmethod
    def _choose(hostnames):
        if not hostnames:
            raise ReceiverNotFoundError("no receiver found")
        if len(hostnames) > 1:
            logger.warning("multiple receivers found: %s, taking: %s" % (hostnames, hostnames[0]))
            logger.warning("use the --address option if you want to use another receiver")
        return hostnames[0]


def unique(items):
    """
    >>> unique(['a', 'b', 'a'])
    ['a', 'b']
    """
    result = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


class ZeroconfDiscovery(ReceiverDiscovery):
    """
    Uses zeroconf to discover receivers.
    The service browser calls back on its own thread. Matching host names are pushed to a queue
    that discover() waits on.
    """
    def __init__(self, service_subtype=None, filter_text=None, timeout=None,
                 zeroconf_factory=Zeroconf, browser_factory=ServiceBrowser):
        """
         :param service_subtype  The subtype of the TCP services to detect, without the leading underscore.
            The type is qualified automatically with TCP and local supertypes.
         :param filter_text text that the service name must contain
         :param timeout seconds to wait for a receiver to be found
        """
        self.service_subtype = service_subtype or service_type
        self.name_filter = filter_text or name_filter
        self.timeout = browse_timeout if timeout is None else timeout
        self.zeroconf_factory = zeroconf_factory
        self.browser_factory = browser_factory
        self.found = Queue()

    @staticmethod
    def qualify_service_type(service_subtype):
        """
        >>> ZeroconfDiscovery.qualify_service_type("raop")
        '_raop._tcp.local.'
        """
        return "_" + service_subtype + "._tcp.local."

    @staticmethod
    def hostname_for_service(zeroconf, type, name):
        """
        resolves the host name serving the named service, or None if it cannot be resolved.
        """
        info = zeroconf.get_service_info(type, name)
        if not info or not info.server:
            return None
        return info.server.rstrip('.')

    def add_service(self, zeroconf, type, name):
        """ notification from the service browser that a service has been added """
        if self.name_filter not in name:
            logger.debug("ignoring service %s" % name)
            return
        hostname = self.hostname_for_service(zeroconf, type, name)
        if hostname:
            logger.info("service available: %s on %s" % (name, hostname))
            self.found.put(hostname)
        else:
            logger.warning("no info for service %s type %s" % (name, type))

    def remove_service(self, zeroconf, type, name):
        """ notification from the service browser that a service has been removed """
        logger.debug("service unavailable: %s" % name)

    def update_service(self, zeroconf, type, name):
        pass

    def discover(self) -> str:
        fqn = self.qualify_service_type(self.service_subtype)
        logger.info("browsing for services of type %s" % fqn)
        zeroconf = self.zeroconf_factory()
        browser = None
        try:
            browser = self.browser_factory(zeroconf, fqn, self)
            hostnames = self._wait_for_hostnames()
        finally:
            if browser is not None:
                browser.cancel()
            zeroconf.close()
        return self._choose(unique(hostnames))

    def _wait_for_hostnames(self):
        """ waits for the first receiver, then collects any others already found. """
        try:
            hostnames = [self.found.get(timeout=self.timeout)]
        except Empty:
            raise ReceiverNotFoundError("no %s receiver found within %ss" % (self.name_filter, self.timeout))
        while not self.found.empty():
            hostnames.append(self.found.get())
        return hostnames


def parse_avahi_browse(output, name_filter):
    """
    Extracts the host names of resolved services from the parseable output of avahi-browse.
    Resolved lines start with '=' and have the host name in the seventh field.
    >>> parse_avahi_browse('=;eth0;IPv4;01@DENON-AVR;AirTunes;local;denon.local;10.0.0.2;1024;', 'DENON')
    ['denon.local']
    """
    hostnames = []
    for line in output.splitlines():
        if not line.startswith('=') or name_filter not in line:
            continue
        fields = line.split(';')
        if len(fields) > 6:
            hostnames.append(fields[6])
    return unique(hostnames)


class AvahiBrowseDiscovery(ReceiverDiscovery):
    """
    Runs avahi-browse to discover receivers.
    """
    def __init__(self, executable=None, service_subtype=None, filter_text=None, timeout=None, run=subprocess.run):
        self.executable = executable or avahi_browse
        self.service_subtype = service_subtype or service_type
        self.name_filter = filter_text or name_filter
        self.timeout = browse_timeout if timeout is None else timeout
        self.run = run

    def command(self):
        return [self.executable, '-p', '-t', '-r', '_%s._tcp' % self.service_subtype]

    def discover(self) -> str:
        command = self.command()
        logger.info("running %s" % ' '.join(command))
        try:
            result = self.run(command, stdout=subprocess.PIPE, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as e:
            raise ReceiverNotFoundError("unable to run %s: %s" % (self.executable, e)) from e
        output = result.stdout.decode('utf-8', errors='replace')
        return self._choose(parse_avahi_browse(output, self.name_filter))
