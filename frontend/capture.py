# frontend/capture.py
"""
Barcode capture from an uploaded photo or a camera attached to this machine.

A capture device is exclusive: only one session may be open at a time, and
``capture_session`` always releases the device, whether a barcode was read,
nothing was found, or an error happened.
"""

import logging
import threading
from contextlib import contextmanager

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

_device_lock = threading.Lock()


class CaptureError(Exception):
    pass


class CaptureBusyError(CaptureError):
    pass


class CaptureDeviceError(CaptureError):
    pass


class NoBarcodeFound(CaptureError):
    pass


def decode_image(image):
    """
    Returns the text of the first barcode found in a Pillow image, or None.

    :param image: A PIL.Image (any mode, pyzbar converts to greyscale).
    """
    # pyzbar loads the zbar shared library on import
    try:
        from pyzbar.pyzbar import decode
    except ImportError as e:
        raise CaptureDeviceError(f"Barcode decoding is not available on this server: {e}")

    for symbol in decode(image):
        text = symbol.data.decode("utf-8").strip()
        if text:
            return text
    return None


class UploadedImageSource:
    """A single frame: a photo uploaded by the user."""

    name = "upload"

    def __init__(self, stream):
        self.stream = stream
        self._image = None

    def open(self):
        try:
            self._image = Image.open(self.stream)
            self._image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise CaptureDeviceError(f"Could not read the uploaded image: {e}")

    def frames(self):
        yield self._image

    def close(self):
        if self._image is not None:
            self._image.close()
            self._image = None


class CameraSource:
    """Frames from an OpenCV camera, until a barcode is read or max_frames run out."""

    name = "camera"

    def __init__(self, index=0, max_frames=300):
        self.index = index
        self.max_frames = max_frames
        self._capture = None
        self._cv2 = None

    def open(self):
        try:
            import cv2
        except ImportError as e:
            raise CaptureDeviceError(f"Camera support is not available on this server: {e}")

        self._cv2 = cv2
        self._capture = cv2.VideoCapture(self.index)
        if not self._capture.isOpened():
            self._capture.release()
            self._capture = None
            raise CaptureDeviceError(
                "No camera found, or it is being used by another application. "
                "Upload a photo of the barcode instead."
            )

    def frames(self):
        cv2 = self._cv2
        for _ in range(self.max_frames):
            ok, frame = self._capture.read()
            if not ok:
                raise CaptureDeviceError("The camera stopped sending frames.")
            yield Image.fromarray(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))

    def close(self):
        if self._capture is not None:
            self._capture.release()
            self._capture = None


@contextmanager
def capture_session(source):
    """Acquires the capture device for the duration of the block."""
    if not _device_lock.acquire(blocking=False):
        raise CaptureBusyError("Another scan is already in progress.")
    try:
        source.open()
        logger.info(f"Capture started ({source.name})")
        try:
            yield source
        finally:
            source.close()
            logger.info(f"Capture released ({source.name})")
    finally:
        _device_lock.release()


def scan_barcode(source, decoder=decode_image):
    """
    Reads frames from ``source`` until one decodes. The device is released
    before the barcode is returned.

    :raises NoBarcodeFound: if no frame contained a readable barcode.
    """
    barcode = None
    with capture_session(source) as device:
        for frame in device.frames():
            barcode = decoder(frame)
            if barcode:
                break

    if not barcode:
        raise NoBarcodeFound(
            "Could not read a barcode. Make sure it is sharp, well lit and "
            "fills most of the picture."
        )
    logger.info(f"Decoded barcode {barcode} ({source.name})")
    return barcode
