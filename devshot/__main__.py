from devshot.cli import main

raise SystemExit(main())
