import os

from mhsurvey import create_app

app = create_app(os.getenv("FLASK_CONFIG", "default"))

if __name__ == "__main__":
    # Run the application
    app.run(debug=app.config.get("DEBUG", False), host="0.0.0.0", port=int(os.getenv("PORT", 5000)))
