from skyhigh import create_app, socketio
from skyhigh.runtime import install_shutdown_hook

app = create_app()
runtime = install_shutdown_hook(app)
 
if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    try:
        socketio.run(app, debug=True, use_reloader=False)
    finally:
        runtime.shutdown()
