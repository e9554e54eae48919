"""
Upstream HTML fixtures and slow local upstreams for timeout tests
"""
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

BASE_URL = "https://vidsrc.to/embed/movie/550"

FRAME_PAGE = (
    '<html><body><div id="player_iframe"><iframe src="/embed/550"></iframe></div>'
    '<div class="ad-banner">AD</div></body></html>'
)

FULL_PAGE = '''<!DOCTYPE html>
<html>
<head>
<title>Embed</title>
<link rel="stylesheet" href="/static/player.css">
<style>
body { color: #fff; }
.mctitle a { font-size: 30px; }
#AdWidgetContainer { position: fixed; bottom: 0; }
#onexbet img { width: 10px; }
</style>
<script src="https://www.googletagmanager.com/gtag/js?id=G-1"></script>
<script src="https://s10.histats.com/js15_as.js"></script>
<script src="/f59d610a61063c7ef3ccdc1fd40d2ae6.js?_=1752438208"></script>
<script src="//cdn.example.net/player.js"></script>
<script>var player = initPlayer('main');</script>
<script>aclib.runPop({zoneId: '123'});</script>
<script>setInterval(function(){ debugger; }, 50);</script>
</head>
<body>
<div class="ad-banner">AD</div>
<div id="banner-top">Buy now</div>
<div id="AdWidgetContainer">widget</div>
<div class="servers" id="hidden">servers</div>
<div id="dontfoid123">overlay</div>
<div znid="99">overlay</div>
<div style="position: fixed; top: 0; left: 0; z-index: 2147483647; background-color: transparent;"></div>
<div style="position:fixed;z-index:2147483647;background:transparent">spaced overlay</div>
<div class="video-wrap" id="main">
  <iframe src="/embed/frame/550"></iframe>
  <img src="/images/poster.jpg">
  <img src="//cdn.example.net/logo.png">
  <a class="play-btn" href="javascript:void(0)">Play</a>
  <button onmouseup="track()" onfocus="track()">Go</button>
  <p class="mctitle"><a href="/movie/550" style="font-size: 30px; color: red">Fight Club</a></p>
</div>
</body>
</html>
'''

HEADLESS_PAGE = '<div class="content">Hello</div>'


class _StallingHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        self.server.release.wait(5)
        try:
            self.send_response(200)
            self.send_header('Content-Type', 'text/html')
            self.end_headers()
            self.wfile.write(b'<html><body>late</body></html>')
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args):
        pass


class _DrippingHandler(BaseHTTPRequestHandler):
    """Answers at once, then sends a few bytes of body every DRIP_INTERVAL seconds"""

    DRIP_INTERVAL = 0.4
    DRIP_COUNT = 8

    def do_GET(self):
        try:
            self.send_response(200)
            self.send_header('Content-Type', 'text/html')
            self.end_headers()
            for _ in range(self.DRIP_COUNT):
                if self.server.release.wait(self.DRIP_INTERVAL):
                    break
                self.wfile.write(b'<p>x</p>')
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args):
        pass


class LocalUpstream:
    """Local HTTP server on an ephemeral port, released and closed by stop()"""

    handler = None

    def __init__(self):
        self.server = ThreadingHTTPServer(('127.0.0.1', 0), self.handler)
        self.server.daemon_threads = True
        self.server.release = threading.Event()
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)

    @property
    def url(self):
        host, port = self.server.server_address[:2]
        return f"http://{host}:{port}/embed/movie/550"

    def start(self):
        self.thread.start()
        return self

    def stop(self):
        self.server.release.set()
        self.server.shutdown()
        self.server.server_close()
        self.thread.join(timeout=5)


class StallingUpstream(LocalUpstream):
    """Holds every request open without answering until stopped"""

    handler = _StallingHandler


class DrippingUpstream(LocalUpstream):
    """Sends headers at once but trickles the body out over about three seconds"""

    handler = _DrippingHandler
