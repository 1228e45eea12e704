"""Application entry point for Passguard"""
import os

from passguard.app import create_app

app = create_app(os.environ.get('PASSGUARD_CONFIG', 'default'))

if __name__ == "__main__":
    app.run(debug=app.config['DEBUG'], host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
