from typstfmt.cli import main

raise SystemExit(main())
