import argparse
import logging
import sys

from bannergen.appinfo.container_parser import FormatError
from bannergen.config import Config, setup_logging
from bannergen.pipeline.banner_pipeline import BannerPipeline

logger = logging.getLogger("bannergen")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="bannergen",
        description="Regenerate Steam library header banners from hero and logo art.",
    )
    parser.add_argument("steam_path", nargs="?", default=None,
                        help="Steam root directory (defaults to the platform install location)")
    args = parser.parse_args(argv)

    cfg = Config.from_env(args.steam_path)
    setup_logging(cfg)
    try:
        BannerPipeline(cfg).run()
    except (FileNotFoundError, FormatError, RuntimeError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
