import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from io import BytesIO

import aiohttp
from PIL import Image, ImageStat, UnidentifiedImageError

from core.config import settings
from scrapers.exceptions import IconSamplingError
from utils import const
from utils.helpers import rgb_to_hex

executor = ThreadPoolExecutor(max_workers=2)


async def fetch_icon_image(url: str) -> bytes:
    timeout = aiohttp.ClientTimeout(total=settings.request_timeout)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(url, headers=const.UA_HEADER) as response:
            response.raise_for_status()
            content_type = response.headers.get("Content-Type", "")
            if not content_type.lower().startswith("image/"):
                raise IconSamplingError(
                    f"Unexpected content type: {content_type} for URL: {url}"
                )
            return await response.read()


def get_average_color(content: bytes) -> tuple[float, float, float]:
    """
    Root-mean-square color over the non-transparent pixels of an image.
    """
    try:
        image = Image.open(BytesIO(content))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise IconSamplingError(f"Cannot identify image: {e}")

    image = image.convert("RGBA")
    alpha = image.getchannel("A")
    if alpha.getbbox() is None:
        raise IconSamplingError("Image is fully transparent")

    mask = alpha.point(lambda value: 255 if value > 0 else 0)
    stat = ImageStat.Stat(image.convert("RGB"), mask)
    return tuple(stat.rms[:3])


def is_dark(rgb: tuple[float, float, float]) -> bool:
    # Perceived (YIQ) brightness
    brightness = sum(rgb[i] * v for i, v in enumerate([0.299, 0.587, 0.114]))
    return brightness < 128


def dominant_color(content: bytes) -> str:
    """Hex color of an icon, the default color if the icon is too dark."""
    rgb = get_average_color(content)
    if is_dark(rgb):
        return const.DEFAULT_COLOR
    return rgb_to_hex(rgb)


async def sample_icon_color(url: str) -> str:
    content = await fetch_icon_image(url)

    loop = asyncio.get_running_loop()
    return await asyncio.wait_for(
        loop.run_in_executor(executor, dominant_color, content),
        settings.image_processing_timeout,
    )
