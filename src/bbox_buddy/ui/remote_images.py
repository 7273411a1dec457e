"""Asynchronous loading of images referenced by http(s) URL."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Set

from PyQt6.QtCore import QObject, QUrl, pyqtSignal
from PyQt6.QtGui import QPixmap
from PyQt6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ("http", "https")


def is_remote_image(path: str) -> bool:
    """Check if an image filename is an http(s) URL."""
    return QUrl(path).scheme().lower() in REMOTE_SCHEMES


class RemoteImageLoader(QObject):
    """
    Downloads remote images and keeps them in an in-memory cache.

    Results are delivered through signals on the GUI thread, keyed by
    the URL that was requested.
    """

    image_loaded = pyqtSignal(str, QPixmap)
    image_failed = pyqtSignal(str)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._manager = QNetworkAccessManager(self)
        self._manager.finished.connect(self._on_finished)
        self._cache: Dict[str, QPixmap] = {}
        self._pending: Set[str] = set()

    def cached(self, url: str) -> Optional[QPixmap]:
        """Get a previously downloaded image, or None."""
        return self._cache.get(url)

    def request(self, url: str) -> None:
        """
        Start downloading an image unless it is cached or already in flight.

        A cached image is emitted immediately.
        """
        pixmap = self._cache.get(url)
        if pixmap is not None:
            self.image_loaded.emit(url, pixmap)
            return
        if url in self._pending:
            return

        self._pending.add(url)
        logger.info(f"Downloading image {url}")
        reply = self._manager.get(QNetworkRequest(QUrl(url)))
        reply.setProperty("source_url", url)

    def _on_finished(self, reply: QNetworkReply) -> None:
        url = reply.property("source_url")
        self._pending.discard(url)

        if reply.error() != QNetworkReply.NetworkError.NoError:
            logger.warning(f"Failed to download image {url}: {reply.errorString()}")
            self.image_failed.emit(url)
        else:
            pixmap = QPixmap()
            if pixmap.loadFromData(reply.readAll()):
                self._cache[url] = pixmap
                self.image_loaded.emit(url, pixmap)
            else:
                logger.warning(f"Downloaded data is not an image: {url}")
                self.image_failed.emit(url)

        reply.deleteLater()
