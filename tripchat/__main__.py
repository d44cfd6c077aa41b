from tripchat.cli import main

raise SystemExit(main())
