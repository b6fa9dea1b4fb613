from atr.cli import main

raise SystemExit(main())
