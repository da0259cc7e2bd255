"""In-memory transport for exercising generated Python bindings."""

import threading
from contextlib import contextmanager


class RWLock:
    """Counts how often the lock is taken in each mode."""

    def __init__(self):
        self._lock = threading.RLock()
        self.reads = 0
        self.writes = 0

    @contextmanager
    def read(self):
        with self._lock:
            self.reads += 1
            yield

    @contextmanager
    def write(self):
        with self._lock:
            self.writes += 1
            yield


class Proxy:
    def __init__(self):
        self._context = None

    def context(self):
        return self._context


class Context:
    """Records registered objects and sent requests."""

    def __init__(self, result=None):
        self.objects = []
        self.requests = []
        self.result = result

    def register(self, proxy):
        proxy._context = self
        self.objects.append(proxy)

    def send_request(self, proxy, opcode, *args):
        self.requests.append((proxy, opcode, args))
        return self.result


class Event:
    """Wire payload; values are handed out in the order they are read."""

    def __init__(self, opcode, *values):
        self.opcode = opcode
        self._values = list(values)

    def _next(self):
        return self._values.pop(0)

    def int32(self):
        return self._next()

    def uint32(self):
        return self._next()

    def string(self):
        return self._next()

    def float32(self):
        return self._next()

    def array(self):
        return self._next()

    def fd(self):
        return self._next()

    def proxy(self, ctx):
        return self._next()
