from drawraster.cli import main

raise SystemExit(main())
