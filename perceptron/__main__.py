from .lanceur import main

raise SystemExit(main())
