from fediring.launcher import main

main()
