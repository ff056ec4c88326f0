"""
Task Manager Development Server
"""
import os

from app import create_app

app = create_app()

if __name__ == "__main__":
    print("🚀 Starting Task Manager...")
    app.run(
        host='0.0.0.0',
        port=int(os.getenv("PORT", "5000")),
        debug=os.getenv("FLASK_ENV", "development") != "production",
        use_reloader=True
    )
