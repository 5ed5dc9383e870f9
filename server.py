# server.py
"""
WSGI server lifecycle: bind, serve on a background thread, stop on
SIGINT/SIGTERM and drain in-flight connections for a bounded time.
"""
import logging
import signal
import threading

from werkzeug.serving import ThreadedWSGIServer, WSGIRequestHandler

import config

logger = logging.getLogger(__name__)


# ------------------ Request handler with timeouts ------------------

class TimeoutRequestHandler(WSGIRequestHandler):
    protocol_version = 'HTTP/1.1'

    # socket timeout for the first request on a connection (read + write)
    timeout = config.READ_TIMEOUT

    def setup(self):
        super().setup()
        self.requests_handled = 0

    def handle_one_request(self):
        # keep-alive: waiting for the next request line is idle time
        if self.requests_handled:
            self.connection.settimeout(config.IDLE_TIMEOUT)
        self.requests_handled += 1
        super().handle_one_request()

    def parse_request(self):
        # request line received, rest of the exchange is read/write bound
        self.connection.settimeout(max(config.READ_TIMEOUT, config.WRITE_TIMEOUT))
        return super().parse_request()


# ------------------ Server ------------------

class DrainingWSGIServer(ThreadedWSGIServer):
    """Threaded werkzeug server that counts live connections so shutdown can wait for them."""

    def __init__(self, *args, **kwargs):
        self._in_flight = 0
        self._idle = threading.Condition()
        super().__init__(*args, **kwargs)

    @property
    def in_flight(self):
        with self._idle:
            return self._in_flight

    def process_request(self, request, client_address):
        with self._idle:
            self._in_flight += 1
        try:
            super().process_request(request, client_address)
        except Exception:
            self._release()
            raise

    def process_request_thread(self, request, client_address):
        try:
            super().process_request_thread(request, client_address)
        finally:
            self._release()

    def _release(self):
        with self._idle:
            self._in_flight -= 1
            self._idle.notify_all()

    def drain(self, timeout):
        """Wait until no connection is being handled. Returns False on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: self._in_flight == 0, timeout)


def make_server(host, port, wsgi_app):
    """Bind the server. werkzeug exits the process with status 1 when binding fails."""
    try:
        return DrainingWSGIServer(host, port, wsgi_app, handler=TimeoutRequestHandler)
    except SystemExit as e:
        # werkzeug calls sys.exit() from inside its `except OSError`
        logger.error("Error starting server: %s", e.__context__ or f"cannot bind {host}:{port}")
        raise


def serve_in_background(server):
    thread = threading.Thread(target=server.serve_forever, name='wsgi-server')
    thread.start()
    return thread


def shutdown(server, timeout=config.SHUTDOWN_TIMEOUT):
    """
    Stop accepting connections, then give in-flight ones up to `timeout`
    seconds. Connection threads are daemons: whatever is left is dropped
    when the process exits.
    """
    server.shutdown()
    drained = server.drain(timeout)
    if drained:
        logger.info("All connections drained")
    else:
        logger.warning("Shutdown timed out after %ss with %d connection(s) open",
                       timeout, server.in_flight)
    server.server_close()
    return drained


# ------------------ Signals ------------------

def install_signal_handlers(stop_event, signals=(signal.SIGINT, signal.SIGTERM)):
    """Route `signals` to `stop_event`. Returns the previous handlers."""
    def handler(signum, frame):
        logger.info("Got signal: %s", signal.Signals(signum).name)
        stop_event.set()

    previous = {}
    for sig in signals:
        previous[sig] = signal.signal(sig, handler)
    return previous


def restore_signal_handlers(previous):
    for sig, old in previous.items():
        signal.signal(sig, old)


def run(wsgi_app, host=config.HOST, port=config.PORT):
    server = make_server(host, port, wsgi_app)
    stop = threading.Event()
    previous = install_signal_handlers(stop)
    try:
        logger.info("Starting server on port %d", port)
        thread = serve_in_background(server)
        stop.wait()
        shutdown(server, config.SHUTDOWN_TIMEOUT)
        thread.join(config.SHUTDOWN_TIMEOUT)
    finally:
        restore_signal_handlers(previous)
    logger.info("Server stopped")
