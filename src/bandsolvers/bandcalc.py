import json, logging, sys
import numpy as np
from .config import load_scan


def _table(a):
    # JSON has no NaN; unfilled entries become null
    return [[None if np.isnan(v) else float(v) for v in row] for row in np.asarray(a)]


def compute_from_config(source):
    cfg = load_scan(source)
    out = {}
    for scan in cfg.scans:
        tables = scan.run(cfg.settings)
        entry = {'phases': scan.phases.tolist()}
        entry.update({name: _table(t) for name, t in tables.items()})
        out[scan.kind] = entry
    return out


def save_bands(data, out_json):
    with open(out_json, 'w') as f:
        json.dump(data, f, indent=2)


def main(argv=None):
    import argparse
    ap = argparse.ArgumentParser(description="Secular and Floquet band structures from a YAML scan description")
    ap.add_argument('--config', required=True)
    ap.add_argument('--out')
    ap.add_argument('-v', '--verbose', action='store_true')
    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(message)s")
    data = compute_from_config(args.config)
    if args.out:
        save_bands(data, args.out)
        print(f"Saved bands to {args.out}")
    else:
        json.dump(data, sys.stdout, indent=2)
        sys.stdout.write("\n")
    return 0


if __name__ == '__main__':
    sys.exit(main())
