from check_apt.plugin import main

raise SystemExit(main())
