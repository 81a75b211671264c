# VoidAppBackEnd.py
import queue
import signal
import sys
from datetime import timedelta

from flask import Flask, Response, render_template

from void import config
from void.Broadcaster import EventBroadcaster
from void.IngestAPI import init_app as init_ingest
from void.logger import get_logger
from void.MessageStore import MessageStore

log = get_logger("app")


def create_app(test_config=None):
    app = Flask(__name__)

    app.config.update(
        SECRET_KEY=config.SECRET_KEY,
        SESSION_COOKIE_NAME=config.SESSION_COOKIE_NAME,
        SESSION_COOKIE_SECURE=config.SESSION_COOKIE_SECURE,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
        PERMANENT_SESSION_LIFETIME=timedelta(seconds=config.SESSION_MAX_AGE),
        MAX_CONTENT_LENGTH=config.MAX_CONTENT_LENGTH,
        MAX_MESSAGE_LENGTH=config.MAX_MESSAGE_LENGTH,
        EVICT_AFTER=config.EVICT_AFTER,
        TICK_INTERVAL=config.TICK_INTERVAL,
        OUTBOX_SIZE=config.OUTBOX_SIZE,
    )
    if test_config is not None:
        app.config.update(test_config)

    # One store and one broadcaster per app, shared by every request
    store = MessageStore(evict_after=app.config['EVICT_AFTER'])
    broadcaster = EventBroadcaster(
        store,
        tick_interval=app.config['TICK_INTERVAL'],
        outbox_size=app.config['OUTBOX_SIZE'],
    )
    app.extensions['void.store'] = store
    app.extensions['void.broadcaster'] = broadcaster

    # 1) Message submissions on /message
    init_ingest(app)

    # 2) SSE endpoint: each viewer gets its own broadcast loop
    @app.route('/void')
    def stream():
        log.info("🔗 /void requested")
        # drain timeout, so a cancelled loop is noticed without a new event
        wait = max(app.config['TICK_INTERVAL'] * 5, 0.5)

        def event_stream():
            # subscribe only once the body is iterated; HEAD never gets here
            q = broadcaster.listen()
            try:
                while broadcaster.is_listening(q):
                    try:
                        event = q.get(timeout=wait)
                    except queue.Empty:
                        continue
                    yield event
            finally:
                broadcaster.forget(q)

        return Response(event_stream(),
                        content_type='text/event-stream',
                        headers={'Cache-Control': 'no-cache'})

    # 3) Feed page
    @app.route('/')
    def index():
        return render_template('index.html')

    return app


def main():
    app = create_app()
    broadcaster = app.extensions['void.broadcaster']

    def graceful_shutdown(signum, frame):
        log.info(f"🛑 caught signal {signum}, closing streams")
        broadcaster.shutdown()
        sys.exit(0)

    signal.signal(signal.SIGINT, graceful_shutdown)
    signal.signal(signal.SIGTERM, graceful_shutdown)

    log.info(f"🚀 starting server on http://{config.HOST}:{config.PORT}")
    app.run(host=config.HOST, port=config.PORT, threaded=True)


if __name__ == '__main__':
    main()
