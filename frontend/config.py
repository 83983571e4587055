import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    API_BASE_URL = os.environ.get('API_BASE_URL', 'http://localhost:8000/api')
    FRONTEND_PORT = int(os.environ.get('FRONTEND_PORT', '5700'))
    CAMERA_INDEX = int(os.environ.get('CAMERA_INDEX', '0'))
    CAMERA_MAX_FRAMES = int(os.environ.get('CAMERA_MAX_FRAMES', '300'))  # ~10s at 30fps
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB max upload size
