"""
Landmark source backed by an OpenCV camera and the MediaPipe Face Landmarker.
"""

import logging
import os
import threading
import time
import urllib.request
from typing import Any, Dict, Optional

import cv2
import mediapipe as mp
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision

from ..modules.geometry import as_landmark_array
from .landmark_source import CapabilityUnavailableError, LandmarkSource

logger = logging.getLogger(__name__)


FACE_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/face_landmarker/"
    "face_landmarker/float16/1/face_landmarker.task"
)


def ensure_face_landmarker_model(model_path: str) -> str:
    """Return ``model_path``, downloading the model there if missing."""
    if os.path.isfile(model_path):
        return model_path

    directory = os.path.dirname(os.path.abspath(model_path))
    os.makedirs(directory, exist_ok=True)
    logger.info(f"Downloading face landmarker model to {model_path}")
    try:
        urllib.request.urlretrieve(FACE_LANDMARKER_MODEL_URL, model_path)
    except OSError as e:
        raise CapabilityUnavailableError(
            f"Could not download face_landmarker.task. "
            f"Download manually from {FACE_LANDMARKER_MODEL_URL} and place it at {model_path}"
        ) from e
    return model_path


class MediaPipeLandmarkSource(LandmarkSource):
    """
    Reads camera frames on a daemon thread and runs the Face Landmarker in
    VIDEO mode on each one. Frames are processed one at a time on that thread.
    """

    def __init__(self, camera_id: int = 0, resolution: tuple = (640, 480),
                 model_path: str = 'models/face_landmarker.task',
                 download_model: bool = True):
        super().__init__()
        self.camera_id = camera_id
        self.resolution = resolution
        self.model_path = model_path
        self.download_model = download_model
        self.fps = 30

        self.landmarker = None
        self.cap = None
        self.is_running = False
        self.capture_thread: Optional[threading.Thread] = None
        self._last_timestamp = 0

    def configure(self, options: Dict[str, Any]) -> None:
        self.fps = int(options.get('fps', self.fps))
        self.camera_id = options.get('camera_id', self.camera_id)

        if self.landmarker is not None:
            return

        model_path = self.model_path
        if self.download_model:
            model_path = ensure_face_landmarker_model(model_path)
        elif not os.path.isfile(model_path):
            raise CapabilityUnavailableError(f"Face landmarker model not found: {model_path}")

        try:
            base_options = mp_tasks.BaseOptions(model_asset_path=model_path)
            landmarker_options = vision.FaceLandmarkerOptions(
                base_options=base_options,
                num_faces=1,
                min_face_detection_confidence=0.5,
                min_tracking_confidence=0.5,
                running_mode=vision.RunningMode.VIDEO,
            )
            self.landmarker = vision.FaceLandmarker.create_from_options(landmarker_options)
        except (RuntimeError, ValueError) as e:
            raise CapabilityUnavailableError(f"Face landmarker failed to load: {e}") from e

        logger.info(f"Face landmarker loaded from {model_path}")

    def start(self) -> None:
        if self.is_running:
            return
        if self.landmarker is None:
            raise CapabilityUnavailableError("Face landmarker not configured")

        cap = cv2.VideoCapture(self.camera_id)
        if not cap.isOpened():
            cap.release()
            raise CapabilityUnavailableError(f"Cannot open camera {self.camera_id}")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.resolution[0])
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.resolution[1])
        cap.set(cv2.CAP_PROP_FPS, self.fps)

        self.cap = cap
        self.is_running = True
        self.capture_thread = threading.Thread(
            target=self._capture_loop, args=(cap,), name='landmark-capture', daemon=True)
        self.capture_thread.start()
        logger.info(f"Camera {self.camera_id} started at {self.fps} FPS")

    def stop(self) -> None:
        self.is_running = False

        if self.capture_thread is not None:
            # The loop releases its own capture handle when it exits
            self.capture_thread.join(timeout=1.0)
            self.capture_thread = None
            self.cap = None
            logger.info("Camera stopped")

    def _next_timestamp(self) -> int:
        # detect_for_video requires strictly increasing timestamps
        timestamp = max(int(time.time() * 1000), self._last_timestamp + 1)
        self._last_timestamp = timestamp
        return timestamp

    def _capture_loop(self, cap) -> None:
        frame_interval = 1.0 / self.fps
        try:
            while self.is_running:
                started = time.time()
                ret, frame = cap.read()

                if not ret:
                    logger.warning("Failed to read frame from camera")
                    time.sleep(0.01)
                    continue

                timestamp = self._next_timestamp()
                rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
                mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)
                result = self.landmarker.detect_for_video(mp_image, timestamp)

                if not self.is_running:
                    break
                if result.face_landmarks:
                    self.emit(as_landmark_array(result.face_landmarks[0]), timestamp)
                else:
                    self.emit(None, timestamp)

                # Frame rate limiting
                elapsed = time.time() - started
                if elapsed < frame_interval:
                    time.sleep(frame_interval - elapsed)
        except Exception as e:
            logger.error(f"Capture loop failed: {e}")
            self.is_running = False
            self.report_error(f"Landmark capture failed: {e}")
        finally:
            cap.release()
