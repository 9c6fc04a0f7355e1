import logging
from pathlib import Path

import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)


def export_map(fig, cfg):
    '''
    Write the poster to every path in cfg.output_paths; format comes from the suffix.
    The figure is closed afterwards. Returns the written paths.
    '''
    written = []
    try:
        for out_fp in cfg.output_paths:
            out_fp = Path(out_fp)
            out_fp.parent.mkdir(parents=True, exist_ok=True)

            fig.savefig(
                out_fp,
                dpi=cfg.dpi,
                facecolor=fig.get_facecolor(),
                format=out_fp.suffix.lstrip('.').lower() or None
            )
            logger.info('Saved: %s', out_fp)
            written.append(out_fp)
    finally:
        plt.close(fig)

    return written
