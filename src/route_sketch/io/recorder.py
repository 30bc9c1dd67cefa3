# route_sketch/io/recorder.py
import json
import queue
import sys
import threading
from dataclasses import asdict
from typing import Protocol


class Sink(Protocol):
    def write(self, ev) -> None: ...


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, ev) -> None:
        self.fp.write(json.dumps(asdict(ev)) + "\n")


class MemorySink:
    def __init__(self):
        self.events: list = []

    def write(self, ev) -> None:
        self.events.append(ev)

    def named(self, name: str) -> list:
        return [e for e in self.events if e.name == name]


# Async sink (non-blocking, drops on overflow)
class AsyncSink:
    def __init__(self, sink: Sink, maxsize: int = 10000):
        self.sink, self.q = sink, queue.Queue(maxsize=maxsize)
        self.dropped = 0
        self._stop = threading.Event()
        self._t = threading.Thread(target=self._run, daemon=True)
        self._t.start()

    def write(self, ev) -> None:
        try:
            self.q.put_nowait(ev)
        except queue.Full:
            self.dropped += 1  # never block a build

    def _run(self):
        while not (self._stop.is_set() and self.q.empty()):
            try:
                ev = self.q.get(timeout=0.1)
            except queue.Empty:
                continue
            try:
                self.sink.write(ev)
            except Exception:
                self.dropped += 1

    def stop(self):
        self._stop.set()
        self._t.join(timeout=1.0)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)
        self.failed_writes = 0

    def emit(self, ev):
        for s in self.sinks:
            try:
                s.write(ev)
            except Exception:
                self.failed_writes += 1  # analytics never break a build
